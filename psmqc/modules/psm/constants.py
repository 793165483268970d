"""
Sentinels, defaults and compiled patterns shared by the PSM summarization modules
"""

import re
import sys

UNKNOWN_PRIMARY_SCORE = 10.0
UNKNOWN_EVALUE = sys.float_info.max
UNKNOWN_FDR = -1.0
UNKNOWN_SEQUENCE_ID = -1

DEFAULT_PRIMARY_THRESHOLD = 1e-10
DEFAULT_PEP_THRESHOLD = 0.01
DEFAULT_EVALUE_THRESHOLD = 0.0001
DEFAULT_FDR_THRESHOLD = 0.01

# Fraction of identities that must carry a search-engine FDR to filter on it
# when a decoy-based FDR cannot be computed
MIN_KNOWN_FDR_FRACTION = 0.20

# Internal K or R not followed by P (trypsin only)
MISSED_CLEAVAGE_REGEX = re.compile(r"[KR][^P][A-Z]")

# K1C9_HUMAN, K1C10_HUMAN, K1CI_HUMAN, K2C1B_HUMAN, K2C6C_HUMAN, K22E_HUMAN,
# Contaminant_K2C1_HUMAN, ...
KERATIN_REGEX = re.compile(r"(K[1-2]C\d+[A-K]*|K22[E,O]|K1CI)_HUMAN", re.IGNORECASE)

# TRYP_PIG, sp|TRYP_PIG, Cntm_P00761|TRYP_PIG, gi|136425|sp|P00760|TRYP_BOVIN, Contaminant_Trypa
TRYPSIN_REGEX = re.compile(r"(TRYP_(PIG|BOVIN)|Contaminant_Trypa)", re.IGNORECASE)

DECOY_PREFIXES = ("reversed_", "scrambled_", "xxx_", "xxx.", "rev_")
DECOY_SUFFIXES = (":reversed",)

PHOSPHO_MOD_NAMES = frozenset(["phosph"])
ACETYL_MOD_NAMES = frozenset(["acetyl", "acnotmt", "acnotmt0", "acnotmt16"])
UBIQUITIN_MOD_NAMES = frozenset(["ubiq_02", "ubnotmt", "ubnotmt0", "ubnotmt16"])

TRYPTIC_CLEAVAGE_STATES = frozenset(["full", "partial"])

# Result types whose primary-score filter compares E-values instead of SpecEValue / PEP
EVALUE_RESULT_TYPES = frozenset(["msalign"])
