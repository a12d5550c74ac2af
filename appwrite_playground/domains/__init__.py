"""Domain layer (playground actions, dispatch and session state).

Domain modules should not depend on UI. Infrastructure access is injected via
factories or passed-in clients so the dispatcher can be tested without a network.
"""
