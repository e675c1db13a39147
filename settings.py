# Elimination
PIVOT_STRATEGY = 'partial'  # 'partial' (largest absolute value in the remaining rows) or 'signed' (largest signed value in all rows)
MAX_RETRIES = 10  # additional passes after the first one before giving up
PIVOT_TOLERANCE = 1e-12  # pivots at or below this times the largest cell of the matrix count as zero

# Transforms
SNAP_EPSILON = 1e-12  # sin/cos values smaller than this are set to exactly 0

# Printing
PRINT_FORMAT = 'f'  # format spec for a single cell, e.g. 'f', '.2f', 'g'

# Visualization
AXIS_COLORS = ['r', 'g']  # x axis, y axis
PLOT_LIMITS = (-10, 10)
