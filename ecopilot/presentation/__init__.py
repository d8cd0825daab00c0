"""
Presentation module - Presentation Layer

HTTP entry points of the pipeline. Controllers only translate between the
wire and the application use cases.
"""
