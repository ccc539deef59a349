"""Fixed names shared by the sock inventory: CSV layout, query keywords, table names."""
# Table
SOCKS_TABLE_NAME = "socks"
SOCKS_UNIQUE_CONSTRAINT = "uq_socks_color_cotton_percentage"

# Cotton percentage bounds (inclusive)
MIN_COTTON_PERCENTAGE = 0
MAX_COTTON_PERCENTAGE = 100

# Stored integers are 32-bit INTEGER columns
MIN_INTEGER = -(2**31)
MAX_INTEGER = 2**31 - 1
MAX_AMOUNT = MAX_INTEGER

# Aggregate query operations
MORE_THAN_OPERATION_NAME = "moreThan"
LESS_THAN_OPERATION_NAME = "lessThan"
EQUAL_OPERATION_NAME = "equal"

# Range listing sort keys (matched case-insensitively)
COLOR_SORT_NAME = "color"
COTTON_SORT_NAME = "cotton"

# CSV batch import
CSV_FORMAT = ".csv"
COLOR_CSV_HEADER_NAME = "color"
COTTON_PERCENTAGE_CSV_HEADER_NAME = "cottonPercentage"
AMOUNT_CSV_HEADER_NAME = "amount"
CSV_HEADERS = frozenset(
    {COLOR_CSV_HEADER_NAME, COTTON_PERCENTAGE_CSV_HEADER_NAME, AMOUNT_CSV_HEADER_NAME}
)
HEADERS_AMOUNT = 3
