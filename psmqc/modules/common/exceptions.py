"""Module containing the psmqc exceptions."""


class PsmSummaryError(Exception):
    """Base class for errors raised while summarizing PSM results."""

    _error_code = ""
    _msg = ""

    @property
    def error_code(self):
        return self._error_code

    @property
    def msg(self):
        return self._msg

    @property
    def detail_msg(self):
        return self._detail_msg

    def __init__(self, detail_msg: str = ""):
        self._detail_msg = detail_msg
        super().__init__(self._msg)

    def __str__(self):
        if self._detail_msg:
            return f"{self._error_code}: {self._msg} {self._detail_msg}"
        return f"{self._error_code}: {self._msg}"


class MissingScoreDataError(PsmSummaryError):
    """Raise when no PSM has a usable score or E-value and too few have a known FDR."""

    _error_code = "MISSING_SCORE_DATA"

    _msg = "Data does not contain MSGF values or E-Values; cannot compute a decoy-based FDR."


class NoDecoyProteinsError(PsmSummaryError):
    """Raise when decoy-based FDR estimation finds no decoy proteins."""

    _error_code = "NO_DECOY_PROTEINS"

    _msg = "Data does not contain decoy proteins; cannot compute a decoy-based FDR."


class EmptyModificationNameError(PsmSummaryError):
    """Raise when a modification descriptor contains an empty modification name."""

    _error_code = "EMPTY_MODIFICATION_NAME"

    _msg = "Empty mod name parsed from the mod description."

    def __init__(self, seq_id: int, mod_description: str):
        self.seq_id = seq_id
        self.mod_description = mod_description
        super().__init__(f"SeqID {seq_id}: '{mod_description}'")


class ScanLookupFailure(PsmSummaryError):
    """Raise when the total scan counts of a dataset cannot be determined."""

    _error_code = "SCAN_LOOKUP_FAILURE"

    _msg = "Unable to look up scan stats for dataset."
