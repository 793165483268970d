#!/usr/bin/env python
"""
psmqc command line interface.

See the Click documentation for more command line flag types:
http://click.pocoo.org/5/
"""

import click

from psmqc import __version__
from psmqc.config import RESULT_TYPES, SummarizerConfig
from psmqc.logging import Timer, configure_package_logging, get_logger
from psmqc.modules.common.exceptions import EmptyModificationNameError
from psmqc.modules.common.file_utils import file_prefix, find_companion_file
from psmqc.modules.common.id.seqinfo import read_result_to_seq_map, read_seq_info, read_seq_to_protein_map
from psmqc.modules.common.id.tsv import TsvPSMReader
from psmqc.modules.psm.constants import DEFAULT_EVALUE_THRESHOLD, DEFAULT_FDR_THRESHOLD
from psmqc.modules.psm.reporter_ions import detect_dynamic_reporter_ion, read_mod_summary
from psmqc.modules.psm.scan_coverage import ScanStatsTable
from psmqc.modules.psm.summarizer import ResultsSummarizer

log = get_logger("psmqc.cli")


def print_version(ctx, params, value):
    if not value or ctx.resilient_parsing:
        return
    click.echo("psmqc, version " + __version__)
    ctx.exit()


psmqc_version = click.option(
    "--version", is_flag=True, callback=print_version, expose_value=False, is_eager=True
)
psm_file = click.option(
    "--psm_file", "psm_file", required=True, type=click.Path(exists=True, dir_okay=False),
    help="Tab-delimited PSM file (synopsis or first hits file, optionally gzipped)",
)
dataset = click.option("--dataset", "dataset", default="", help="Dataset name (default: PSM file name)")
job = click.option("--job", "job", default=0, type=int, help="Job number reported in the stats file")
result_type = click.option(
    "--result_type", "result_type", default="msgfplus", type=click.Choice(RESULT_TYPES, case_sensitive=False),
    help="Search engine result type (default: msgfplus)",
)
primary_threshold = click.option(
    "--primary_threshold", "primary_threshold", type=float, default=None,
    help="SpecEValue or PEP threshold; 1 or more disables the filter (default: 1E-10, 0.01 for PEP)",
)
fdr_threshold = click.option(
    "--fdr_threshold", "fdr_threshold", type=float, default=DEFAULT_FDR_THRESHOLD,
    help="FDR threshold; 1 or more disables the filter (default: 0.01)",
)
evalue_threshold = click.option(
    "--evalue_threshold", "evalue_threshold", type=float, default=DEFAULT_EVALUE_THRESHOLD,
    help="E-value threshold for E-value based result types (default: 1E-4)",
)
mod_summary = click.option(
    "--mod_summary", "mod_summary", type=click.Path(exists=True, dir_okay=False),
    help="Mod summary file, used to detect dynamic TMT / iTRAQ mods",
)
scan_stats = click.option(
    "--scan_stats", "scan_stats", type=click.Path(exists=True, dir_okay=False),
    help="Tab-delimited file with Dataset, ScanCountTotal and ScanCountMSn columns",
)
ms_info = click.option(
    "--ms_info", "ms_info", multiple=True, type=click.Path(exists=True, dir_okay=False),
    help="*_ms_info.tsv files to count scans from (alternative to --scan_stats)",
)
output_dir = click.option("--output_dir", "output_dir", default="", help="Directory for the PSM_Stats.txt file")
log_level = click.option(
    "--log_level", "log_level", default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
)
log_file = click.option("--log_file", "log_file", default=None, help="Also write log messages to this file")


@click.command()
@psmqc_version
@psm_file
@dataset
@job
@result_type
@primary_threshold
@fdr_threshold
@evalue_threshold
@mod_summary
@scan_stats
@ms_info
@output_dir
@log_level
@log_file
def main(
    psm_file,
    dataset,
    job,
    result_type,
    primary_threshold,
    fdr_threshold,
    evalue_threshold,
    mod_summary,
    scan_stats,
    ms_info,
    output_dir,
    log_level,
    log_file,
):
    """Summarize PSMs passing a score threshold and an FDR threshold."""
    configure_package_logging(level=log_level, log_file=log_file)

    dataset = dataset or file_prefix(psm_file)

    result_to_seq_map = {}
    seq_mod_descriptions = {}
    seq_to_protein_map = {}

    result_to_seq_file = find_companion_file(psm_file, "_ResultToSeqMap.txt")
    seq_info_file = find_companion_file(psm_file, "_SeqInfo.txt")
    if result_to_seq_file is not None and seq_info_file is not None:
        result_to_seq_map = read_result_to_seq_map(result_to_seq_file)
        seq_mod_descriptions = read_seq_info(seq_info_file)

        seq_to_protein_file = find_companion_file(psm_file, "_SeqToProteinMap.txt")
        if seq_to_protein_file is not None:
            seq_to_protein_map = read_seq_to_protein_map(seq_to_protein_file)
    else:
        log.info("Sequence info files not found; normalizing peptides using their mod symbols")

    if mod_summary is None:
        mod_summary = find_companion_file(psm_file, "_ModSummary.txt")

    dynamic_reporter_ion = None
    if mod_summary is not None:
        dynamic_reporter_ion = detect_dynamic_reporter_ion(read_mod_summary(mod_summary))
        if dynamic_reporter_ion is not None:
            log.info(f"Dynamic reporter ion mod found: {dynamic_reporter_ion[0]}")

    scan_stats_lookup = None
    if scan_stats:
        scan_stats_lookup = ScanStatsTable.from_tsv(scan_stats, default_dataset=dataset)
    elif ms_info:
        scan_stats_lookup = ScanStatsTable.from_ms_info(list(ms_info), default_dataset=dataset)

    config_kwargs = {}
    if primary_threshold is not None:
        config_kwargs["primary_threshold"] = primary_threshold

    config = SummarizerConfig.for_result_type(
        result_type,
        fdr_threshold=fdr_threshold,
        e_value_threshold=evalue_threshold,
        dynamic_reporter_ion=dynamic_reporter_ion,
        dataset_name=dataset,
        job=job,
        output_directory=output_dir,
        save_results_to_file=True,
        **config_kwargs,
    )

    reader = TsvPSMReader(psm_file, dataset_name=dataset)
    summarizer = ResultsSummarizer(config, scan_stats_lookup)

    try:
        with Timer(log, f"summarizing {dataset}"):
            results = summarizer.summarize(
                reader.read(),
                result_to_seq_map=result_to_seq_map,
                seq_to_protein_map=seq_to_protein_map,
                seq_mod_descriptions=seq_mod_descriptions,
            )
    except EmptyModificationNameError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"{dataset}: {results.score_stats.total_psms} PSMs / {results.score_stats.unique_peptide_count} peptides "
        f"(score filter), {results.fdr_stats.total_psms} PSMs / {results.fdr_stats.unique_peptide_count} peptides "
        f"(FDR filter)"
    )

    if not results.fdr_filter_succeeded:
        click.echo(f"FDR filter failed: {results.error_message}", err=True)


if __name__ == "__main__":
    main()
