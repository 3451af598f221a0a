"""
The receiver's line protocol: the codec for status lines, the line assembler and the
background loop that reads status from the receiver.
"""
