"""
Wire format readers for encoded search indexes.

- byte_cursor: bounds-checked big-endian byte reader and scratch buffer
- envelope: base64/magic/gzip envelope and page-name table
- cluster_fsm: byte-at-a-time cluster stream decoder
"""
