# Services package init
"""
Wedding Gallery Backend — Services Layer
==========================================

What:  Business logic between routes (HTTP) and the external collaborators.

Service Inventory:
    - BlessingStore (abstract): blessing persistence contract
    - InMemoryBlessingStore / DatabaseBlessingStore: its two implementations
    - BlessingService: presence validation, delegates to the store
    - MediaGateway (abstract): image upload/listing contract
    - CloudinaryMediaGateway: Cloudinary SDK implementation
"""
