# On-disk format
FIELD_SEPARATOR = "\t"
NAME_SEPARATOR = " "
LINE_TERMINATOR = "\n"
COMMENT_CHAR = "#"
ENCODING = "utf-8"
# Undecodable bytes in foreign lines are carried through unchanged
ENCODING_ERRORS = "surrogateescape"

# ANSI Color Codes
COLOR_GREEN = "\033[92m"
COLOR_RED = "\033[91m"
COLOR_RESET = "\033[0m"

# Status Messages
STATUS_WRITTEN = f"{COLOR_GREEN}Hosts file updated{COLOR_RESET}"
STATUS_FAILED = f"{COLOR_RED}Failed to update hosts file{COLOR_RESET}"
STATUS_READ_FAILED = f"{COLOR_RED}Failed to read hosts file{COLOR_RESET}"
