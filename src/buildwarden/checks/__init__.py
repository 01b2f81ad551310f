from .consistency import check_property_consistency, check_daemon_args
