# Supabase Auth
# This module relies on Supabase's built-in authentication system.
# Supabase Auth handles:
# - User registration (auth.users table)
# - Session issuance and JWT signing (outside this service)
# - Password hashing and security
#
# This service only verifies bearer tokens and provisions the public profile row.

"""
Supabase Auth calls used here:
- auth.sign_up() - Register new users
- auth.get_user() - Resolve the current user from a JWT

On registration a row is added to the public users table (see
modules/users/models.py) with enabled_modules left null, so the default
module set applies until the user changes it.
"""
