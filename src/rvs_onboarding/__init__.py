"""
RVS Onboarding: multi-step user onboarding with a configurable page layout.

The admin decides which optional form components (about me, address,
birthdate) appear on page 2 or page 3 of the wizard.
"""

try:
    from importlib.metadata import version
    __version__ = version("rvs-onboarding")
except Exception:
    __version__ = "0.0.0"  # Fallback for development

__all__ = ["__version__"]
