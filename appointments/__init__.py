"""Appointments application for the clinic backend.

This package contains the patient and appointment models, the
data-access helpers, the service layer owning transaction boundaries,
and the REST views exposed to doctors.
"""
