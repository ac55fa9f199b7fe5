# inspired from:

# https://python-packaging-user-guide.readthedocs.org/en/latest/single_source_version/
# https://github.com/pypa/warehouse/blob/master/warehouse/__about__.py

__name__ = "flatarray"
__version__ = "0.3.0"
__summary__ = "Cache-friendly ragged arrays in two contiguous buffers"
__uri__ = "https://github.com/flatarray/flatarray"
__author__ = "flatarray contributors"
__email__ = ""
__license__ = "MIT"
__title__ = "flatarray"
__release__ = True
