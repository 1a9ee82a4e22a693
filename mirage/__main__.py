from mirage.main import main

main()
