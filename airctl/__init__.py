"""Airport simulation: controller, violation-notice generator, airline portal and payment desk."""

__version__ = "0.1.0"