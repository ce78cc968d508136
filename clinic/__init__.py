"""Django project package for the clinic appointments backend."""
