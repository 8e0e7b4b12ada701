"""Objective-C type encoding grammar."""

from .cursor import ASCII_DIGITS as ASCII_DIGITS
from .cursor import Cursor as Cursor
from .cursor import ParseError as ParseError
from .cursor import ParseErrorKind as ParseErrorKind
from .encoder import encode as encode
from .layout import LayoutError as LayoutError
from .layout import size_and_alignment as size_and_alignment
from .parser import decode_type as decode_type
from .parser import parse_optional_type as parse_optional_type
from .parser import parse_type as parse_type
from .parser import parse_type_from as parse_type_from
from .types import *
