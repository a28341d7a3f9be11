"""Constants for the jsonsdraft package."""

# Draft used when a document does not name a known meta-schema in '$schema'
DEFAULT_DRAFT = 'latest'

# Seconds to wait for a remote schema document
LOADER_TIMEOUT = 30

# Retrieval URL assumed for documents read from stdin
DEFAULT_BASE_URI = 'file:///stdin.json'

# Canonical meta-schema URLs per draft ordinal
META_SCHEMA_URLS = {
    4: 'http://json-schema.org/draft-04/schema',
    6: 'http://json-schema.org/draft-06/schema',
    7: 'http://json-schema.org/draft-07/schema',
    2019: 'https://json-schema.org/draft/2019-09/schema',
    2020: 'https://json-schema.org/draft/2020-12/schema',
}
