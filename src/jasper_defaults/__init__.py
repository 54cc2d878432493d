"""Set default input-control values on JasperReports Server reports by editing their XML resources."""

__version__ = "0.1.0"
