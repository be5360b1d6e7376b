"""Global configuration: format constants, document keys, limits."""

# osgjs document format version written into every document
WRITER_VERSION = 2

# Free-text producer string stored under the "Generator" key
GENERATOR = "osgjs-export"

# Number of texture-coordinate channels a geometry may carry
MAX_TEXTURE_UNITS = 32

# Vertex attribute keys inside "VertexAttributeList"
VERTEX_KEY = "Vertex"
NORMAL_KEY = "Normal"
COLOR_KEY = "Color"
TEXCOORD_KEY_PREFIX = "TexCoord"
TANGENT_KEY = "Tangent"
BITANGENT_KEY = "Bitangent"

# Buffer target names
ARRAY_BUFFER = "ARRAY_BUFFER"
ELEMENT_ARRAY_BUFFER = "ELEMENT_ARRAY_BUFFER"

# Rendering hint written for transparent state sets
TRANSPARENT_BIN = "TRANSPARENT_BIN"
