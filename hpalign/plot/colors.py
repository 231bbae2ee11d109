"""
Color constants for hpalign plotting.
"""

# =============================================================================
# NUCLEOTIDE COLORS
# =============================================================================

NT_COLOR = {
    "A": "#74AB86",  # soft green
    "C": "#6E93C0",  # soft blue
    "G": "#C19A5A",  # soft warm ochre
    "T": "#C26F6F",  # soft red
    "N": "#9A9A9A",  # grey
    "": "#000000",
}


# =============================================================================
# DP STATE COLORS
# =============================================================================

STATE_COLORS = dict(
    lower="#9BBF4C",   # insertion
    middle="#4285C7",  # match/mismatch
    upper="#A058C7",   # deletion
)

# Band outline and homopolymer runs
BAND_COLOR = "#ffcc00"
RUN_COLOR = "#7030a0"


# =============================================================================
# HEATMAP COLORMAPS
# =============================================================================

HEATMAP_COLORMAPS = {
    'sequential': 'viridis',
}
