"""
The MODEL layer contains pure data structures.
It knows nothing about triangulation or interpolation.
It deals with coordinate spaces, sample tables, and bounding boxes.
"""
