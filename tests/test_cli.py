import pandas as pd
import pytest
from click.testing import CliRunner

from psmqc.cli import main


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the console handlers pointing at the real stdout instead of the runner's buffer."""
    monkeypatch.setattr("psmqc.cli.configure_package_logging", lambda **kwargs: None)


class TestCli:
    """The psmqc command."""

    def test_summarize(self, psm_file, tmp_path):
        result = CliRunner().invoke(main, ["--psm_file", str(psm_file), "--output_dir", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "Dataset_syn: 4 PSMs / 3 peptides (score filter)" in result.output

        stats = pd.read_csv(tmp_path / "Dataset_syn_PSM_Stats.txt", sep="\t")
        assert stats.loc[0, "Dataset"] == "Dataset_syn"
        assert stats.loc[0, "Spectra_Searched"] == 4
        assert stats.loc[0, "Unique_Peptides_FDR_Filtered"] == 2

    def test_sequence_info_and_scan_stats(self, psm_file, tmp_path):
        (tmp_path / "Dataset_syn_ResultToSeqMap.txt").write_text(
            "Result_ID\tUnique_Seq_ID\n1\t10\n2\t11\n3\t11\n4\t12\n5\t13\n"
        )
        (tmp_path / "Dataset_syn_SeqInfo.txt").write_text(
            "Unique_Seq_ID\tMod_Description\n10\t\n11\tPhosph:3\n12\t\n13\t\n"
        )
        (tmp_path / "Dataset_syn_SeqToProteinMap.txt").write_text(
            "Unique_Seq_ID\tProtein_Name\n10\tProtA\n11\tProtB\n11\tProtE\n12\tXXX_ProtC\n13\tProtD\n"
        )
        scan_stats = tmp_path / "ScanStats.txt"
        scan_stats.write_text("Dataset\tScanCountTotal\tScanCountMSn\nDS1\t100\t80\n")

        result = CliRunner().invoke(
            main,
            [
                "--psm_file", str(psm_file),
                "--dataset", "DS1",
                "--scan_stats", str(scan_stats),
                "--output_dir", str(tmp_path),
            ],
        )

        assert result.exit_code == 0, result.output

        stats = pd.read_csv(tmp_path / "DS1_PSM_Stats.txt", sep="\t")
        assert stats.loc[0, "Unique_Peptides_MSGF_Filtered"] == 3
        assert stats.loc[0, "Unique_Proteins_MSGF_Filtered"] == 4

    def test_fdr_failure_reported(self, tmp_path):
        psm_file = tmp_path / "NoDecoy_syn.txt"
        pd.DataFrame(
            {"ResultID": [1, 2], "Scan": [1, 2], "Peptide": ["PEPTIDEK", "ELVISK"], "Protein": ["ProtA", "ProtB"],
             "MSGF_SpecProb": [1e-12, 1e-13]}
        ).to_csv(psm_file, sep="\t", index=False)

        result = CliRunner().invoke(main, ["--psm_file", str(psm_file), "--output_dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "FDR filter failed" in result.output

    def test_invalid_mod_description(self, psm_file, tmp_path):
        (tmp_path / "Dataset_syn_ResultToSeqMap.txt").write_text("Result_ID\tUnique_Seq_ID\n1\t10\n")
        (tmp_path / "Dataset_syn_SeqInfo.txt").write_text("Unique_Seq_ID\tMod_Description\n10\t,Phosph:5\n")

        result = CliRunner().invoke(main, ["--psm_file", str(psm_file), "--output_dir", str(tmp_path)])

        assert result.exit_code != 0
        assert "EMPTY_MODIFICATION_NAME" in result.output

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])

        assert result.exit_code == 0
        assert result.output.startswith("psmqc, version")
