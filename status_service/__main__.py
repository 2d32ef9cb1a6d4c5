from status_service.main import main

main()
