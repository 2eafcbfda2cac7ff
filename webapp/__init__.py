"""
Chat Pattern Analyzer Streamlit package.

Upload page in ``home.py``; stored analyses are browsed through the pages
under ``pages/``. Helpers are split into view logic (core), presentation (ui),
and Streamlit session utilities (utils).
"""
