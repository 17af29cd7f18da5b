# link kind codecs register themselves in linkutil on import
from vplslink.iplink import vpls  # noqa: F401
