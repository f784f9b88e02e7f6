import logging


cookies_logger = logging.getLogger('crumbjar.cookies')
headers_logger = logging.getLogger('crumbjar.headers')
