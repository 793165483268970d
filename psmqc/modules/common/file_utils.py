from pathlib import Path
import os

import logging

log = logging.getLogger(__name__)


def get_clean_stem(path):
    name = Path(path).name
    for ext in [".txt.gz", ".tsv.gz", ".gz"]:
        if name.endswith(ext):
            return name[: -len(ext)]
    return Path(path).stem


def file_prefix(path):
    path = os.path.normpath(str(path))
    if "\\" in path:
        path = path.replace("\\", "/")
    return get_clean_stem(path)


def find_companion_file(psm_file, suffix):
    """
    Find a file next to a PSM file that shares its base name, e.g. the ``_ResultToSeqMap.txt``
    file of ``Dataset_syn.txt``.

    Returns:
    --------
    Optional[Path]
        The companion file path, or None if it does not exist
    """
    psm_path = Path(psm_file)
    stem = file_prefix(psm_path)
    for marker in ["_syn", "_fht"]:
        if stem.endswith(marker):
            candidate = psm_path.with_name(stem + suffix)
            if candidate.exists():
                return candidate
            stem = stem[: -len(marker)]
            break

    candidate = psm_path.with_name(stem + suffix)
    if candidate.exists():
        return candidate

    log.debug(f"No {suffix} file found for {psm_path.name}")
    return None
