# WORKFLOW: ETL package for price catalog files.
# Used by: Import and export pipelines
# Modules include:
# 1. archive.py - Open the CSV entry of an uploaded ZIP, build export ZIPs
# 2. tabular.py - Parse CSV rows, write ProductRecords as CSV
# 3. validators.py - Validate single rows into ProductRecords
# 4. records.py - ProductRecord, RowRejection, ImportSummary
#
# ETL flow: ZIP -> CSV stream -> rows -> ProductRecords -> store

"""
ETL package for price catalog import and export.
"""
