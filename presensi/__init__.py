"""Presensi — HR & attendance API."""
