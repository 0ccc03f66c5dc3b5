from city_library.cli import main

main()
