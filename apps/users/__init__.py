"""Users app package.

Defines the platform account model. Accounts carry an account kind
(customer, agency or one of the back-office roles); the reservation
engine only reads it to refuse customer bookings from back-office
identities. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
