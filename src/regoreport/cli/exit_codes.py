# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_FAILED = 1  # Tests failed or the report could not be produced
EXIT_DATAERR = 65  # Input data was invalid (e.g., malformed opa JSON)
EXIT_NOINPUT = 66  # Input file not found
EXIT_CONFIG = 78  # Required settings missing (e.g., no path)
