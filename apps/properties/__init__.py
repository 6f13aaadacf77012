"""Properties app package.

Minimal view of the property catalog. The catalog itself (search,
photos, agency listings) lives outside the reservation engine; this app
only keeps what a reservation needs: a stable reference and the
snapshot copied onto each reservation.
"""
