# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Registration also writes a row into public.profiles.

"""
Supabase Auth provides:
- auth.sign_up() - Register new members (first_name, last_name, phone in user_metadata)
- auth.sign_in_with_password() - Authenticate members and admins
- auth.get_user() - Resolve the principal behind a JWT
- auth.sign_out() - Logout

user_roles:
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null) - 'admin' grants access to every admin endpoint
- unique constraint on (user_id, role)
"""
