"""
Module containing all the load/dump code for DTX / GDA charts
"""
from .enum import Dialect
from .loaders_and_dumpers import LOADERS
