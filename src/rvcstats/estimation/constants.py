"""
Constants used throughout rvcstats estimation.

Column names follow the RVC server tables.
"""

# =============================================================================
# Sample data columns
# =============================================================================

REGION = "REGION"
YEAR = "YEAR"
STRAT = "STRAT"
PROT = "PROT"
STATION = "PRIMARY_SAMPLE_UNIT"
SPECIES = "SPECIES_CD"
NUM = "NUM"
LEN = "LEN"

# =============================================================================
# Stratum data columns
# =============================================================================

NTOT = "NTOT"
NMTOT = "NMTOT"

# =============================================================================
# Life history parameter columns
# =============================================================================

LC = "LC"
LM = "LM"
WLEN_A = "WLEN_A"
WLEN_B = "WLEN_B"

# =============================================================================
# Derived columns
# =============================================================================

LENGTH_CLASS = "length_class"
LENGTH = "length"
VALUE = "y"
PRESENT = "present"

# Stratum (weighting unit) key; REGION is appended when present
STRATUM_KEYS = [YEAR, STRAT, PROT]

REQUIRED_SAMPLE_COLUMNS = [YEAR, STRAT, PROT, STATION, SPECIES, NUM]
REQUIRED_STRATUM_COLUMNS = [YEAR, STRAT, PROT, NTOT]
REQUIRED_LHP_COLUMNS = [SPECIES, LC, LM, WLEN_A, WLEN_B]

# Output column holding the estimate for each statistic
STAT_COLUMNS = {
    "density": "density",
    "occurrence": "occurrence",
    "abundance": "abundance",
    "biomass": "biomass",
    "length_frequency": "frequency",
}
