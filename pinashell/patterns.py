#!/usr/bin/env python3

# pinashell - A screen reader shell that speaks stdin, stdout and stderr
# Copyright (C) 2025 Robert Macrae
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
patterns.py - Centralized regex patterns and character classes
All regex patterns are compiled once at module load time
"""

import re

# Argument delimiters: space, tab, carriage return, newline, bell
TOKEN_DELIMITERS = " \t\r\n\a"
QUOTE_CHAR = '"'

# Whitespace that is spoken by name in captured output
SPEAKABLE_WHITESPACE_PATTERN = re.compile(r'[\n\t ]')
SPEAKABLE_WHITESPACE_NAMES = {
    '\n': ' newline ',
    '\t': ' tab ',
    ' ': ' space ',
}

# A line with nothing to execute
BLANK_LINE_PATTERN = re.compile(r'^\s*$')

# Characters that end a word while typing
WORD_SEPARATORS = (' ', '\t')
