# Color similarity
RGB_SIMILARITY_THRESHOLD = 40
HSL_HUE_TOLERANCE = 0.01
HSL_SATURATION_TOLERANCE = 0.2
HSL_LIGHTNESS_TOLERANCE = 0.5

# Region growth
DEFAULT_SAMPLE_RADIUS = 3

# Legacy grid scan
GRID_SCAN_BORDER = 10

# Histogram signal band detection
HISTOGRAM_THRESHOLD = 0.001
HISTOGRAM_BORDER = 2
HISTOGRAM_MIDPOINT = 128
HISTOGRAM_BUCKETS = 256
HISTOGRAM_NORMALIZED_PEAK = 100.0

# Simple pager: edge bands of the frame, sampled at reduced resolution
PAGER_BAND_FRACTION = 0.15
PAGER_SAMPLE_SCALE = 0.25
PAGER_THRESHOLD = 30
