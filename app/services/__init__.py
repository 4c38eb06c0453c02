"""
Service Organization
====================
**application/**
  Singleton services managed by ServiceContainer. One instance per application.
  Examples: FarmMonitoringService, VegetationService, NotificationsService

**protocols.py**
  Structural interfaces (ports) the monitoring loop depends on.
"""
