import pytest

oms = pytest.importorskip("pyopenms")

from fidoadapter.core.idxml import load_idxml, store_idxml  # noqa: E402
from fidoadapter.core.merger import apply_group_scores, pool_runs  # noqa: E402
from fidoadapter.core.model import ProteinGroup  # noqa: E402
from tests.helpers import write_idxml  # noqa: E402

RUNS = [
    ("run1", [("sp|P1|A_HUMAN", "target"), ("DECOY_sp|P1|A_HUMAN", "decoy")]),
    ("run2", [("sp|P2|B_HUMAN", "target")]),
]
PEPTIDES = [
    ("run1", "PEPTIDEK", 0.9, ["sp|P1|A_HUMAN"]),
    ("run2", "ELVISLIVESK", 0.7, ["sp|P2|B_HUMAN", "sp|P1|A_HUMAN"]),
]


def _as_str(value):
    return value.decode() if isinstance(value, bytes) else str(value)


@pytest.fixture
def idxml_file(tmp_path):
    path = tmp_path / "input.idXML"
    write_idxml(path, RUNS, PEPTIDES)
    return path


def test_load_idxml(idxml_file):
    data = load_idxml(idxml_file)

    assert data.source == str(idxml_file)
    assert [run.identifier for run in data.runs] == ["run1", "run2"]
    assert [hit.accession for hit in data.runs[0].hits] == [
        "sp|P1|A_HUMAN",
        "DECOY_sp|P1|A_HUMAN",
    ]
    assert data.runs[0].hits[1].target_decoy == "decoy"
    assert data.runs[0].higher_score_better

    peptide = data.peptides[1]
    assert peptide.identifier == "run2"
    assert peptide.score_type == "Posterior Probability"
    assert peptide.hits[0].sequence == "ELVISLIVESK"
    assert peptide.hits[0].score == pytest.approx(0.7)
    assert peptide.hits[0].protein_accessions == ["sp|P1|A_HUMAN", "sp|P2|B_HUMAN"]


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_idxml(tmp_path / "missing.idXML")


def test_store_groups_of_existing_runs(idxml_file, tmp_path):
    data = load_idxml(idxml_file)
    data.runs[0].protein_groups = [ProteinGroup(0.8, ["sp|P1|A_HUMAN"])]
    data.runs[0].meta["Fido_prob_protein"] = 0.5

    out = tmp_path / "output.idXML"
    store_idxml(out, data)

    protein_ids, peptide_ids = [], []
    oms.IdXMLFile().load(str(out), protein_ids, peptide_ids)
    assert len(protein_ids) == 2
    (group,) = protein_ids[0].getIndistinguishableProteins()
    assert group.probability == pytest.approx(0.8)
    assert [_as_str(acc) for acc in group.accessions] == ["sp|P1|A_HUMAN"]
    assert protein_ids[0].getMetaValue("Fido_prob_protein") == pytest.approx(0.5)
    assert len(peptide_ids) == 2


def test_store_pooled_run(idxml_file, tmp_path):
    data = load_idxml(idxml_file)
    pooled = pool_runs(data.runs, data.peptides)
    pooled.protein_groups = [ProteinGroup(0.6, ["sp|P1|A_HUMAN", "sp|P2|B_HUMAN"])]
    apply_group_scores(pooled)
    data.runs = [pooled]

    out = tmp_path / "pooled.idXML"
    store_idxml(out, data)

    reloaded = load_idxml(out)
    (run,) = reloaded.runs
    assert run.identifier == ""
    assert run.search_engine == "Fido"
    assert run.date is not None
    assert sorted(hit.accession for hit in run.hits) == [
        "DECOY_sp|P1|A_HUMAN",
        "sp|P1|A_HUMAN",
        "sp|P2|B_HUMAN",
    ]
    assert run.find_hit("sp|P2|B_HUMAN").score == pytest.approx(0.6)
    assert run.find_hit("DECOY_sp|P1|A_HUMAN").target_decoy == "decoy"
    assert all(peptide.identifier == "" for peptide in reloaded.peptides)
