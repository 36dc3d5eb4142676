# MongoDB collections
ENVIRONMENTS = "Environment"
MATCHES = "Match"
DOCUMENTS = "Document"
SCHEMAS = "Schema"
USERS = "User"

# Reserved filter key addressing a document by its id
ID_FIELD = "_id"

# Data type assigned to fragments submitted in bulk from scouting devices
SUBMITTED_DATA_TYPE = "data"

# Data type listed with matches unless another is asked for
MATCH_DATA_TYPE = "match"

DEFAULT_DOCUMENT_TYPES = ("match", "data", "pit", "note")
DEFAULT_ENVIRONMENT = "test"
API_VERSION = "0.0.1"
