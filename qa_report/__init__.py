"""
qa-report — Failed-tests bug report engine.

Modules:
    config       — YAML configuration with built-in defaults
    models       — failed-test / task / project input records
    analysis     — section and bug-group parser for the free-text analysis
    narrative    — structured analysis text generated from the records
    text_report  — plain-text / Markdown listing of the filtered failed tests
    metrics      — severity / task / environment statistics
    text         — text measurement and word wrapping
    document     — page and display-list model
    layout       — flow cursor and page-break policy
    primitives   — boxes, badges, summary cards
    tables       — multi-page tables with repeating headers
    charts       — horizontal bar charts
    composer     — cover, TOC and section layout
    finalizer    — page headers/footers and TOC page numbers
    encoder      — ReportLab PDF serialisation
    pdf_builder  — public entry point
"""
