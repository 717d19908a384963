# src/geoflow_netcdf/__init__.py
try:
    from .geoflow_netcdf_version import __version__
except ImportError:
    try:
        from importlib.metadata import version, PackageNotFoundError
        __version__ = version("geoflow-netcdf")
    except (ImportError, PackageNotFoundError):
        __version__ = "0.0.0"

from .config import ConverterConfig
from .conversion import FileMode, GToNetCDF, SchemaStore, TypeMapper, TypeTag
from .header import GHeaderInfo
from .nodes import GNode, NodeLike

__all__ = [
    "ConverterConfig",
    "FileMode",
    "GHeaderInfo",
    "GNode",
    "GToNetCDF",
    "NodeLike",
    "SchemaStore",
    "TypeMapper",
    "TypeTag",
    "__version__",
]
