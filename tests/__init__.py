__description__ = "Test suite for seqalign"
