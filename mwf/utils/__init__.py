from ._checks import check_type
from ._docs import fill_doc
from .config import sys_info
from .logs import add_file_handler, logger, set_log_level, verbose
