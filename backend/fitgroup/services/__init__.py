"""
FitGroup Backend — Services Layer
=================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP; services own the business rules.
How:   Session-bound services are constructed per request with the request's
       AsyncSession; stateless helpers (file storage, webhook) are singletons.

Service Inventory:
    - GroupService: group lifecycle, listing, likes
    - MembershipService: join / leave
    - RankingService: leaderboard over a trailing window
    - RecordService: exercise records
    - TagService: tag resolution, listing, orphan pruning
    - FileService: image upload validation and storage
    - WebhookNotifier: outbound notification after a record is created
    - credentials: the single place passwords are compared
"""
