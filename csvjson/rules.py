"""
Fixed conversion rules.

Anything here is part of the conversion contract and is not configurable.
"""

DEFAULT_DELIMITER = ","
CANDIDATE_DELIMITERS = (",", "\t", ";", "|", ":")

# auto-detection only looks at the head of the input
DETECT_SAMPLE_CHARS = 4000
DETECT_SAMPLE_LINES = 20

QUOTE = '"'
BLANK_HEADER_PREFIX = "col_"

# DynamoDB AttributeValue type descriptors
ATTRIBUTE_VALUE_TAGS = frozenset({"S", "N", "BOOL", "NULL", "M", "L", "SS", "NS", "BS", "B"})

# largest magnitude a double holds as an exact integer
MAX_EXACT_INT = 2 ** 53
