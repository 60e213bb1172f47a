"""Dentrak package.

Feature modules (attendance, schedules, practices, ...) hold the domain records;
`staging` holds the optimistic editing engine that previews calendar changes in
memory and flushes them to a record store on explicit commit.
"""
