# SentryWallet client package
# Modules:
#   config.py       : Settings resolved from Streamlit secrets / environment
#   observability.py: Logging and Sentry setup
#   db.py           : Supabase client construction
#   models.py       : Credentials, auth mode and submission state types
#   service.py      : Auth Service contract and its Supabase adapter
#   gate.py         : One-shot navigation to the dashboard
#   session.py      : Session probe, auth event subscription, view activation
#   form.py         : Login / sign-up form controller and Google login
#   browser.py      : Streamlit address bar, router and redirect adapters
#   auth.py         : Session accessors and page guards
