"""
pretty-size: memory usage report for firmware images.

Reconciles the MEMORY block of a linker script with the section listing
of a size tool, applies optional user edits (grouping regions, ignoring
sections) and reports used/free bytes per region.

Usage:
    from pretty_size.pipeline import build_report

    report = build_report(script_text, size_output)
    for region in report.regions:
        print(region.name, region.used, region.free, region.percent_used)
"""

__version__ = "0.1.0"
