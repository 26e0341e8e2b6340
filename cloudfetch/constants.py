"""cloudfetch constants.

Default values shared by the settings model, the fetchers and the CLI.
"""

# S3 reports an empty location constraint for buckets living in this region
DEFAULT_REGION = "us-east-1"

# Upper bound accepted for a configured concurrency cap
MAX_WORKERS_LIMIT = 256

# Region name patterns: standard, China and GovCloud partitions
REGION_PATTERN = r"^(us|eu|ap|sa|ca|me|af|il|mx)\-\w+\-\d+$"
CHINA_REGION_PATTERN = r"^cn\-\w+\-\d+$"
US_GOV_REGION_PATTERN = r"^us\-gov\-\w+\-\d+$"

# Output bundle file names
NODES_FILE = "nodes.jsonl"
RELATIONS_FILE = "relations.jsonl"
DEFAULT_OUTPUT_DIR = "cloudfetch-output"
