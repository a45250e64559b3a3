import copy
import dataclasses

import networkx as nx
import pytest

from chemlab.domain.enums import BondStereo
from chemlab.domain.errors import MalformedStructureError
from chemlab.domain.structure import (
    add_atom,
    add_bond,
    build_structure,
    formula,
    fragments,
    remove_atom,
    remove_bond,
    set_bond_order,
    structure_graph,
    structure_to_payload,
)

from conftest import ETHANOL, WATER


def payload_with(**changes):
    p = copy.deepcopy(ETHANOL)
    p.update(changes)
    return p


def test_build_valid_structure():
    s = build_structure(ETHANOL)
    assert s.name == "Ethanol"
    assert s.atom_ids() == ("c1", "c2", "o1")
    assert len(s.bonds) == 2
    assert s.atoms[0].x == 0.0


def test_accepted_structure_invariants_hold():
    s = build_structure(WATER)
    ids = [a.id for a in s.atoms]
    assert len(ids) == len(set(ids))
    pairs = set()
    for b in s.bonds:
        assert b.source in ids and b.target in ids
        assert b.source != b.target
        assert b.key() not in pairs
        pairs.add(b.key())


def test_numeric_ids_are_normalised_to_strings():
    s = build_structure({
        "name": "H2",
        "atoms": [{"id": 1, "element": "H"}, {"id": 2, "element": "H"}],
        "bonds": [{"source": 1, "target": 2, "order": 1.0}],
    })
    assert s.atom_ids() == ("1", "2")
    assert s.bonds[0].order == 1
    assert s.description == ""


def test_rejects_duplicate_atom_ids():
    atoms = ETHANOL["atoms"] + [{"id": "c1", "element": "N"}]
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(atoms=atoms))


def test_rejects_bond_to_unknown_atom():
    bonds = ETHANOL["bonds"] + [{"source": "o1", "target": "h9", "order": 1}]
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(bonds=bonds))


def test_rejects_self_loop():
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(bonds=[{"source": "c1", "target": "c1", "order": 1}]))


def test_rejects_duplicate_unordered_pair():
    bonds = ETHANOL["bonds"] + [{"source": "c2", "target": "c1", "order": 2}]
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(bonds=bonds))


@pytest.mark.parametrize("order", [0, 4, 1.5, True, "2", None])
def test_rejects_bad_bond_order(order):
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(bonds=[{"source": "c1", "target": "c2", "order": order}]))


def test_stereo_values():
    s = build_structure(payload_with(bonds=[{"source": "c1", "target": "c2", "order": 1, "stereo": "wedge"}]))
    assert s.bonds[0].stereo == BondStereo.WEDGE
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(bonds=[{"source": "c1", "target": "c2", "order": 1, "stereo": "up"}]))


def test_rejects_missing_atoms_list_or_name():
    with pytest.raises(MalformedStructureError):
        build_structure({"name": "X", "bonds": []})
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(name=""))
    with pytest.raises(MalformedStructureError):
        build_structure(["not", "a", "mapping"])


def test_resonance_must_reference_parent_atoms():
    ok = payload_with(resonanceStructures=[
        {"description": "alt", "bonds": [{"source": "c1", "target": "c2", "order": 2}]}])
    assert build_structure(ok).resonance_structures[0].bonds[0].order == 2

    bad = payload_with(resonanceStructures=[
        {"description": "alt", "bonds": [{"source": "c1", "target": "x9", "order": 2}]}])
    with pytest.raises(MalformedStructureError):
        build_structure(bad)


def test_null_optional_sections_are_accepted():
    s = build_structure(payload_with(resonanceStructures=None, symmetry=None, description=None))
    assert s.resonance_structures == ()
    assert s.symmetry is None


def test_disconnected_fragments_are_allowed():
    salt = build_structure({
        "name": "Sodium chloride",
        "description": "Ionic salt.",
        "atoms": [{"id": "na", "element": "Na"}, {"id": "cl", "element": "Cl"}],
        "bonds": [],
    })
    assert [len(f) for f in fragments(salt)] == [1, 1]


def test_valence_is_not_checked():
    atoms = [{"id": "c", "element": "C"}] + [{"id": f"h{i}", "element": "H"} for i in range(5)]
    bonds = [{"source": "c", "target": f"h{i}", "order": 1} for i in range(5)]
    s = build_structure({"name": "CH5", "atoms": atoms, "bonds": bonds})
    assert formula(s) == "CH5"


def test_structure_is_immutable(ethanol):
    with pytest.raises(dataclasses.FrozenInstanceError):
        ethanol.name = "Methanol"


def test_payload_round_trip(water):
    assert build_structure(structure_to_payload(water)) == water
    assert structure_to_payload(water)["symmetry"]["pointGroup"] == "C2v"


def test_graph_and_formula(ethanol):
    g = structure_graph(ethanol)
    assert isinstance(g, nx.Graph)
    assert g.number_of_nodes() == 3
    assert g.edges["c2", "o1"]["order"] == 1
    assert formula(ethanol) == "C2O"


def test_edits_return_new_structures(ethanol):
    edited = add_bond(add_atom(ethanol, "h1", "H"), "o1", "h1")
    assert len(edited.bonds) == 3
    assert len(ethanol.bonds) == 2

    dbl = set_bond_order(ethanol, "o1", "c2", 2)
    assert [b.order for b in dbl.bonds] == [1, 2]
    assert [b.order for b in ethanol.bonds] == [1, 1]

    assert len(remove_bond(ethanol, "c2", "c1").bonds) == 1


def test_remove_atom_drops_incident_bonds(ethanol):
    s = remove_atom(ethanol, "c2")
    assert s.atom_ids() == ("c1", "o1")
    assert s.bonds == ()


def test_invalid_edits_raise_and_leave_input_untouched(ethanol):
    with pytest.raises(MalformedStructureError):
        add_bond(ethanol, "c1", "c2")
    with pytest.raises(MalformedStructureError):
        add_atom(ethanol, "c1", "N")
    with pytest.raises(MalformedStructureError):
        set_bond_order(ethanol, "c1", "c2", 5)
    with pytest.raises(MalformedStructureError):
        remove_bond(ethanol, "c1", "o1")
    assert ethanol == build_structure(ETHANOL)


def test_non_string_description_is_malformed():
    with pytest.raises(MalformedStructureError):
        build_structure(payload_with(description=42))
