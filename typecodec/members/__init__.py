"""Encodings of class members: method signatures and property attributes."""

from .attributes import Attribute as Attribute
from .attributes import AttributeCode as AttributeCode
from .attributes import Attributes as Attributes
from .attributes import SetterType as SetterType
from .attributes import split_attributes as split_attributes
from .attributes import split_property_type as split_property_type
from .method import MethodTypeEncodings as MethodTypeEncodings
