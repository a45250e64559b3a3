# chemlab/domain/structure.py
"""
Punto unico in cui l'output del modello diventa stato fidato dell'applicazione.

Severo sulla forma del grafo (id unici, legami verso atomi esistenti, niente
self-loop, niente legami duplicati, ordine 1/2/3), permissivo sulla chimica:
la valenza non viene controllata.
"""
from __future__ import annotations

import dataclasses
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

import networkx as nx

from chemlab.domain.enums import BondStereo
from chemlab.domain.errors import MalformedStructureError
from chemlab.domain.models import Atom, Bond, ResonanceStructure, Structure, Symmetry

VALID_BOND_ORDERS = (1, 2, 3)


def build_structure(payload: Mapping[str, Any]) -> Structure:
    """
    Costruisce e valida una Structure dal JSON del modello (chiavi camelCase,
    come in MoleculeData: atoms, bonds, resonanceStructures, symmetry.pointGroup).
    """
    if not isinstance(payload, Mapping):
        raise MalformedStructureError(f"Payload struttura non valido: {type(payload).__name__}")

    name = _require_str(payload, "name")
    description = _optional_str(payload, "description")

    atoms = tuple(_parse_atom(a) for a in _require_list(payload, "atoms"))
    bonds = tuple(_parse_bond(b) for b in _require_list(payload, "bonds", default=[]))

    resonance = tuple(
        ResonanceStructure(
            description=_optional_str(r, "description"),
            bonds=tuple(_parse_bond(b) for b in _require_list(r, "bonds", default=[])),
        )
        for r in _require_mappings(payload, "resonanceStructures")
    )

    symmetry = None
    raw_sym = payload.get("symmetry")
    if raw_sym is not None:
        if not isinstance(raw_sym, Mapping):
            raise MalformedStructureError("symmetry deve essere un oggetto.")
        symmetry = Symmetry(
            point_group=_require_str(raw_sym, "pointGroup"),
            elements=tuple(str(e) for e in _require_list(raw_sym, "elements", default=[])),
        )

    structure = Structure(
        name=name,
        description=description,
        atoms=atoms,
        bonds=bonds,
        resonance_structures=resonance,
        symmetry=symmetry,
    )
    validate_structure(structure)
    return structure


def validate_structure(structure: Structure) -> Structure:
    """Ricontrolla gli invarianti del grafo; restituisce la struttura stessa se valida."""
    seen: Set[str] = set()
    for atom in structure.atoms:
        if not atom.id:
            raise MalformedStructureError("Atomo senza id.")
        if atom.id in seen:
            raise MalformedStructureError(f"Id atomo duplicato: {atom.id}")
        seen.add(atom.id)

    _check_bonds(structure.bonds, seen, where="bonds")
    for i, res in enumerate(structure.resonance_structures):
        _check_bonds(res.bonds, seen, where=f"resonanceStructures[{i}]")
    return structure


def _check_bonds(bonds: Iterable[Bond], atom_ids: Set[str], where: str) -> None:
    pairs: Set[Tuple[str, str]] = set()
    for bond in bonds:
        if bond.source not in atom_ids or bond.target not in atom_ids:
            raise MalformedStructureError(
                f"{where}: legame {bond.source}-{bond.target} verso un atomo inesistente."
            )
        if bond.source == bond.target:
            raise MalformedStructureError(f"{where}: self-loop sull'atomo {bond.source}.")
        if bond.order not in VALID_BOND_ORDERS:
            raise MalformedStructureError(f"{where}: ordine di legame non valido ({bond.order}).")
        key = bond.key()
        if key in pairs:
            raise MalformedStructureError(f"{where}: legame duplicato tra {key[0]} e {key[1]}.")
        pairs.add(key)


# --- SERIALIZZAZIONE (contesto per il modello) ---
def structure_to_payload(structure: Structure) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": structure.name,
        "description": structure.description,
        "atoms": [_atom_to_dict(a) for a in structure.atoms],
        "bonds": [_bond_to_dict(b) for b in structure.bonds],
    }
    if structure.resonance_structures:
        payload["resonanceStructures"] = [
            {"description": r.description, "bonds": [_bond_to_dict(b) for b in r.bonds]}
            for r in structure.resonance_structures
        ]
    if structure.symmetry is not None:
        payload["symmetry"] = {
            "pointGroup": structure.symmetry.point_group,
            "elements": list(structure.symmetry.elements),
        }
    return payload


def _atom_to_dict(atom: Atom) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": atom.id, "element": atom.element}
    if atom.x is not None:
        d["x"] = atom.x
    if atom.y is not None:
        d["y"] = atom.y
    return d


def _bond_to_dict(bond: Bond) -> Dict[str, Any]:
    d: Dict[str, Any] = {"source": bond.source, "target": bond.target, "order": bond.order}
    if bond.stereo is not None:
        d["stereo"] = bond.stereo.value
    return d


# --- GRAFO ---
def structure_graph(structure: Structure) -> nx.Graph:
    """Grafo networkx: nodi = id atomo (attributo element), archi = legami (attributo order)."""
    g = nx.Graph()
    for atom in structure.atoms:
        g.add_node(atom.id, element=atom.element)
    for bond in structure.bonds:
        g.add_edge(bond.source, bond.target, order=bond.order)
    return g


def fragments(structure: Structure) -> List[Set[str]]:
    """Frammenti disconnessi (es. gli ioni di un sale), dal più grande."""
    components = nx.connected_components(structure_graph(structure))
    return sorted((set(c) for c in components), key=len, reverse=True)


def formula(structure: Structure) -> str:
    """Formula bruta in ordine di Hill (C, H, poi alfabetico)."""
    counts = Counter(a.element for a in structure.atoms)
    order: List[str] = []
    if "C" in counts:
        order += [e for e in ("C", "H") if e in counts]
    order += sorted(e for e in counts if e not in order)
    return "".join(e if counts[e] == 1 else f"{e}{counts[e]}" for e in order)


# --- MODIFICA MANUALE (sempre una nuova Structure) ---
def add_atom(structure: Structure, atom_id: str, element: str,
             x: Optional[float] = None, y: Optional[float] = None) -> Structure:
    if not element:
        raise MalformedStructureError("Elemento mancante.")
    atom = Atom(id=atom_id, element=element, x=x, y=y)
    return _rebuild(structure, atoms=structure.atoms + (atom,))


def remove_atom(structure: Structure, atom_id: str) -> Structure:
    if atom_id not in structure.atom_ids():
        raise MalformedStructureError(f"Atomo inesistente: {atom_id}")

    def keep(b: Bond) -> bool:
        return atom_id not in (b.source, b.target)

    return _rebuild(
        structure,
        atoms=tuple(a for a in structure.atoms if a.id != atom_id),
        bonds=tuple(b for b in structure.bonds if keep(b)),
        resonance_structures=tuple(
            dataclasses.replace(r, bonds=tuple(b for b in r.bonds if keep(b)))
            for r in structure.resonance_structures
        ),
    )


def add_bond(structure: Structure, source: str, target: str, order: int = 1,
             stereo: Optional[BondStereo] = None) -> Structure:
    bond = Bond(source=source, target=target, order=order, stereo=stereo)
    return _rebuild(structure, bonds=structure.bonds + (bond,))


def remove_bond(structure: Structure, source: str, target: str) -> Structure:
    key = Bond(source, target).key()
    bonds = tuple(b for b in structure.bonds if b.key() != key)
    if len(bonds) == len(structure.bonds):
        raise MalformedStructureError(f"Legame inesistente: {source}-{target}")
    return _rebuild(structure, bonds=bonds)


def set_bond_order(structure: Structure, source: str, target: str, order: int) -> Structure:
    key = Bond(source, target).key()
    found = False
    bonds = []
    for b in structure.bonds:
        if b.key() == key:
            found = True
            b = dataclasses.replace(b, order=order)
        bonds.append(b)
    if not found:
        raise MalformedStructureError(f"Legame inesistente: {source}-{target}")
    return _rebuild(structure, bonds=tuple(bonds))


def _rebuild(structure: Structure, **changes) -> Structure:
    return validate_structure(dataclasses.replace(structure, **changes))


# --- Helpers di parsing ---
def _parse_atom(raw: Any) -> Atom:
    if not isinstance(raw, Mapping):
        raise MalformedStructureError("Atomo non valido (atteso un oggetto).")
    return Atom(
        id=_coerce_id(raw.get("id"), "atom.id"),
        element=_require_str(raw, "element"),
        x=_optional_float(raw, "x"),
        y=_optional_float(raw, "y"),
    )


def _parse_bond(raw: Any) -> Bond:
    if not isinstance(raw, Mapping):
        raise MalformedStructureError("Legame non valido (atteso un oggetto).")
    return Bond(
        source=_coerce_id(raw.get("source"), "bond.source"),
        target=_coerce_id(raw.get("target"), "bond.target"),
        order=_coerce_order(raw.get("order", 1)),
        stereo=_coerce_stereo(raw.get("stereo")),
    )


def _coerce_id(v: Any, key: str) -> str:
    # il modello a volte restituisce id numerici
    if isinstance(v, bool):
        raise MalformedStructureError(f"{key} non valido: {v!r}")
    if isinstance(v, int):
        return str(v)
    if isinstance(v, str) and v.strip():
        return v.strip()
    raise MalformedStructureError(f"{key} mancante o non valido: {v!r}")


def _coerce_order(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise MalformedStructureError(f"Ordine di legame non valido: {v!r}")
    if v not in VALID_BOND_ORDERS:
        raise MalformedStructureError(f"Ordine di legame non valido: {v!r}")
    return int(v)


def _coerce_stereo(v: Any) -> Optional[BondStereo]:
    if v is None:
        return None
    try:
        return BondStereo(str(v).strip().lower())
    except ValueError:
        raise MalformedStructureError(f"Stereochimica non valida: {v!r}") from None


def _require_str(data: Mapping[str, Any], key: str) -> str:
    v = data.get(key)
    if not isinstance(v, str) or not v.strip():
        raise MalformedStructureError(f"Manca {key}")
    return v.strip()


def _optional_str(data: Mapping[str, Any], key: str) -> str:
    # a differenza dei campi accessori di quiz e guide, qui un tipo sbagliato rende la struttura malformata
    v = data.get(key)
    if v is None:
        return ""
    if not isinstance(v, str):
        raise MalformedStructureError(f"{key} deve essere una stringa.")
    return v.strip()


def _optional_float(data: Mapping[str, Any], key: str) -> Optional[float]:
    v = data.get(key)
    if v is None:
        return None
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise MalformedStructureError(f"Coordinata {key} non numerica: {v!r}")
    return float(v)


def _require_list(data: Mapping[str, Any], key: str, default: Optional[list] = None) -> list:
    v = data.get(key)
    if v is None:
        v = default
    if not isinstance(v, list):
        raise MalformedStructureError(f"Manca la lista {key}")
    return v


def _require_mappings(data: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    items = _require_list(data, key, default=[])
    if not all(isinstance(x, Mapping) for x in items):
        raise MalformedStructureError(f"{key} deve contenere oggetti.")
    return items
