# Routes package init
"""
CivicMap Backend — API Routes Package
======================================

Route Inventory:
    - welcome.py: GET /welcome                   (welcome text)
                  GET /welcome/bulletins         (all bulletins)
                  GET /welcome/locations         (all named locations)
                  GET /welcome/parkingspaces     (all parking-space polygons)
    - health.py:  GET /health                    (service health check)

Routes stay thin: call a service, return its value, let the global exception
handlers format failures.
"""
