"""Reference interpreter for the Monkey language with a quote/unquote macro system."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
