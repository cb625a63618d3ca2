"""GalaxyTex package

Loads an exported galaxy dataset (a manifest plus raw float32 particle
files) and repacks each file into a float pixel buffer that a real-time
particle renderer can bind as a texture.

Most callers need :func:`galaxytex.api.load_galaxy` and a render target
per family; :func:`galaxytex.encoding.encode` is the standalone encoder.
"""

from .api import encode_file, load_galaxy, open_manifest
from .config import LoaderOptions, load_options
from .encoding import OversizePolicy, PixelFormat, TextureBuffer, encode
from .errors import (
    EncodeError,
    FileMissingError,
    GalaxyTexError,
    ManifestError,
    UnknownFamilyError,
    UploadError,
)
from .loader import FamilyLoader, FamilyState
from .manifest import (
    AttributeManifest,
    FamilyKind,
    FamilyManifest,
    GalaxyManifest,
)
from .targets import RecordingTarget, RenderTarget

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "encode_file",
    "load_galaxy",
    "open_manifest",
    "LoaderOptions",
    "load_options",
    "OversizePolicy",
    "PixelFormat",
    "TextureBuffer",
    "encode",
    "EncodeError",
    "FileMissingError",
    "GalaxyTexError",
    "ManifestError",
    "UnknownFamilyError",
    "UploadError",
    "FamilyLoader",
    "FamilyState",
    "AttributeManifest",
    "FamilyKind",
    "FamilyManifest",
    "GalaxyManifest",
    "RecordingTarget",
    "RenderTarget",
]
