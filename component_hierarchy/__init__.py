# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Component Hierarchy

A tool for displaying the tree of components rendered by a React
component, resolving each child component to its source file.
"""

import importlib.metadata

__version__ = importlib.metadata.version("component-hierarchy")
