"""FileStats - concurrent file size distribution scanner"""

from filestats.__version__ import __version__
from filestats.histogram import SizeHistogram, bucket_for_size
from filestats.scanner import DirectoryScanner, ScanResult, scan


__all__ = [
    '__version__',
    'DirectoryScanner',
    'ScanResult',
    'SizeHistogram',
    'bucket_for_size',
    'scan',
]
