import asyncio
import dataclasses

import pytest

from chemlab.domain.errors import MalformedStructureError, OperationInProgress, OracleUnavailable, ReactionFailed
from chemlab.domain.models import ReactionConditions
from chemlab.domain.structure import add_atom, add_bond
from chemlab.engine.archive import Archive
from chemlab.engine.molecule_lab import MoleculeLab

from conftest import WATER, settle


@pytest.fixture
def lab(oracle, stats):
    return MoleculeLab(oracle, stats, Archive())


@pytest.mark.asyncio
async def test_search_sets_current(lab, stats):
    s = await lab.search("Ethanol")
    assert lab.current is s
    assert s.name == "Ethanol"
    assert stats.stats.molecules_generated == 1
    assert not lab.loading


@pytest.mark.asyncio
async def test_blank_search_is_ignored(lab, oracle):
    assert await lab.search("  ") is None
    assert oracle.calls == []


@pytest.mark.asyncio
async def test_failed_search_keeps_previous_structure(lab, oracle, stats):
    await lab.search("Ethanol")
    previous = lab.current
    with pytest.raises(OracleUnavailable):
        await lab.search("Unobtainium")

    oracle.structures["Broken"] = dict(WATER, bonds=[{"source": "o", "target": "zz", "order": 1}])
    with pytest.raises(MalformedStructureError):
        await lab.search("Broken")

    assert lab.current is previous
    assert stats.stats.molecules_generated == 1


@pytest.mark.asyncio
async def test_apply_reaction_replaces_current(lab, stats):
    await lab.search("Ethanol")
    conditions = ReactionConditions(temp=60.0)
    product = await lab.apply_reaction("PCC", conditions)
    assert lab.current is product
    assert lab.conditions == conditions
    assert stats.stats.reactions_mastered == 1


@pytest.mark.asyncio
async def test_failed_reaction_leaves_structure_unchanged(lab, oracle):
    original = await lab.search("Ethanol")
    oracle.error = OracleUnavailable("offline")
    with pytest.raises(ReactionFailed):
        await lab.apply_reaction("PCC")
    assert lab.current is original


@pytest.mark.asyncio
async def test_apply_reaction_needs_a_molecule(lab):
    with pytest.raises(ValueError):
        await lab.apply_reaction("PCC")


@pytest.mark.asyncio
async def test_analyze_validates_before_calling_oracle(lab, oracle, ethanol):
    oracle.analysis = dict(WATER)
    edited = add_bond(add_atom(ethanol, "h1", "H"), "o1", "h1")
    result = await lab.analyze(edited)
    assert result.name == "Water"
    assert lab.current is result

    broken = dataclasses.replace(ethanol, bonds=ethanol.bonds + ethanol.bonds[:1])
    calls = len(oracle.calls)
    with pytest.raises(MalformedStructureError):
        await lab.analyze(broken)
    assert len(oracle.calls) == calls


@pytest.mark.asyncio
async def test_one_request_at_a_time(lab, oracle):
    oracle.release = asyncio.Event()
    first = asyncio.create_task(lab.search("Ethanol"))
    await settle()
    assert lab.loading
    with pytest.raises(OperationInProgress):
        await lab.search("Water")
    oracle.release.set()
    assert (await first).name == "Ethanol"


@pytest.mark.asyncio
async def test_archive_load_discards_inflight_search(lab, oracle, stats, water):
    item = lab.archive.save(water)
    oracle.release = asyncio.Event()
    pending = asyncio.create_task(lab.search("Ethanol"))
    await settle()

    assert lab.load_from_archive(item.id) == water
    oracle.release.set()

    assert await pending is None
    assert lab.current == water
    assert stats.stats.molecules_generated == 0


@pytest.mark.asyncio
async def test_archive_load_discards_inflight_reaction(lab, oracle, stats, water):
    await lab.search("Ethanol")
    item = lab.archive.save(water)
    oracle.release = asyncio.Event()
    pending = asyncio.create_task(lab.apply_reaction("PCC"))
    await settle()

    lab.load_from_archive(item.id)
    oracle.release.set()

    assert await pending is None
    assert lab.current == water
    assert stats.stats.reactions_mastered == 0


@pytest.mark.asyncio
async def test_save_and_reload(lab):
    assert lab.save_to_archive() is None
    await lab.search("Ethanol")
    item = lab.save_to_archive()
    await lab.search("Water")
    assert lab.load_from_archive(item.id).name == "Ethanol"
    assert lab.load_from_archive("missing") is None
    assert lab.current.name == "Ethanol"
