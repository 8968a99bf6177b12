from identical_files.core.models import Algorithm, ErrorPolicy, ResultFormat

ALGORITHM_ALIASES = {algorithm.value: algorithm for algorithm in Algorithm}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Hashing algorithm for the full-content digest:\n"
    + "".join(f"  {a.value:<9}: {a.description}\n" for a in Algorithm)
    + "Default: blake3\n"
)

RESULT_FORMAT_ALIASES = {
    "json": ResultFormat.JSON,
    "yaml": ResultFormat.YAML,
    "personal": ResultFormat.PERSONAL,
}

RESULT_FORMAT_CHOICES = list(RESULT_FORMAT_ALIASES.keys())

RESULT_FORMAT_HELP_TEXT = (
    "Format of the report printed to stdout:\n"
    "  json      : One pretty-printed JSON object per group\n"
    "  yaml      : One YAML mapping per group\n"
    "  personal  : Human-readable text (default)\n"
)

ERROR_POLICY_ALIASES = {
    "abort": ErrorPolicy.ABORT,
    "skip": ErrorPolicy.SKIP,
}

ERROR_POLICY_CHOICES = list(ERROR_POLICY_ALIASES.keys())

ERROR_POLICY_HELP_TEXT = (
    "What to do with a file or directory that cannot be read:\n"
    "  abort : Stop the run with an error (default)\n"
    "  skip  : Leave it out, warn, and report the count at the end\n"
)

EPILOG_TEXT = """
Examples:
  Find identical files in the current directory
  %(prog)s

  Find identical files in Downloads, only files between 1KB and 10MB
  %(prog)s -i ~/Downloads -b 1K -B 10M

  Only groups with at least 4 identical files, sorted by number of files
  %(prog)s -i ~/Downloads -f 4 -s

  JSON report using SHA-256 with absolute paths
  %(prog)s -i ~/Downloads -a sha256 -r json --full-path

  Also export the result to CSV and XLSX in the current directory
  %(prog)s -i ~/Downloads -c . -x .
"""
