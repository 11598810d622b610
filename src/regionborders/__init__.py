"""Region Borders - Derive political border artefacts from region ID maps.

Region Borders is a CLI tool that reads an indexed "region ID" image (each
pixel colour encodes a region identity) and produces border data for rendering
crisp borders on a globe:

- ordered 3D border polylines projected through a sphere mesh's UV layout
- a smooth anti-aliased border overlay (PNG)
- a normalised distance field to the nearest border (32-bit float TIFF)

Example:
    $ regionborders sdf provinces.png --spread 64

This will create provinces-sdf.tiff next to the input map.
"""

__version__ = "0.1.0"
__author__ = "Region Borders contributors"

__all__ = ["__author__", "__version__"]
